"""Project Portal package.

Feature modules (projects, tasks, leaves, clients, ...) sit behind a thin Flask
controller layer. Services receive an explicit ``CallerContext`` and apply the
role visibility rules from ``access`` before touching a repository.
"""
