from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.guards import Guards
from .auth.service import AuthService
from .clients.mysql_client_repository import MySQLClientRepository
from .clients.service import ClientService
from .dashboards.mysql_dashboard_repository import MySQLDashboardRepository
from .dashboards.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.service import DocumentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .invoices.mysql_invoice_repository import MySQLInvoiceRepository
from .invoices.service import InvoiceService
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .leaves.service import LeaveService
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.service import ProjectService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.service import TaskService


@dataclass(frozen=True)
class Container:
    """Services wired for the controllers.

    ``conn`` is None when the container is assembled from in-memory repositories.
    """

    conn: Optional[DatabaseConnection]

    auth_service: AuthService
    guards: Guards
    project_service: ProjectService
    task_service: TaskService
    leave_service: LeaveService
    client_service: ClientService
    invoice_service: InvoiceService
    document_service: DocumentService
    employee_service: EmployeeService
    dashboard_service: DashboardService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    profiles_repo = MySQLProfileRepository(conn)
    clients_repo = MySQLClientRepository(conn)
    projects_repo = MySQLProjectRepository(conn)
    tasks_repo = MySQLTaskRepository(conn)
    leaves_repo = MySQLLeaveRequestRepository(conn)
    invoices_repo = MySQLInvoiceRepository(conn)
    documents_repo = MySQLDocumentRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    dashboards_repo = MySQLDashboardRepository(conn)

    auth_service = AuthService(profiles_repo, clients_repo)

    return Container(
        conn=conn,
        auth_service=auth_service,
        guards=Guards(auth_service),
        project_service=ProjectService(projects_repo, tasks_repo, documents_repo, clients_repo, profiles_repo),
        task_service=TaskService(tasks_repo, projects_repo, profiles_repo),
        leave_service=LeaveService(leaves_repo),
        client_service=ClientService(clients_repo),
        invoice_service=InvoiceService(invoices_repo),
        document_service=DocumentService(documents_repo),
        employee_service=EmployeeService(employees_repo),
        dashboard_service=DashboardService(dashboards_repo),
    )
