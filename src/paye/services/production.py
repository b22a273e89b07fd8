"""In-memory production tracking: products, processes and workers.

Independent of the payroll engine. Process status moves through
ProcessStateMachine (Pending → In Progress → Completed).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from paye.services.state_machine import ProcessStateMachine, ProcessStatus

logger = logging.getLogger(__name__)


class WorkerRole(str, Enum):
    """Worker roles."""

    SUPERVISOR = "Supervisor"
    STAFF = "Staff"


class NotFoundError(Exception):
    """Raised when a product, process or worker does not exist."""

    def __init__(self, kind: str, identifier: int):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


@dataclass
class Worker:
    id: int
    name: str
    role: WorkerRole
    contact: str = ""
    shift: str = ""


@dataclass
class ProductionProcess:
    """A production step; start/end times are None until reached."""

    id: int
    name: str
    description: str = ""
    status: ProcessStatus = ProcessStatus.PENDING
    start_time: datetime | None = None
    end_time: datetime | None = None
    supervisor: str = ""
    staff_worker: str = ""
    quantity: int = 0
    quality_check: bool = False
    notes: str = ""

    @property
    def is_complete(self) -> bool:
        return self.status == ProcessStatus.COMPLETED


@dataclass
class Product:
    id: int
    name: str
    description: str
    start_date: date
    target_date: date
    processes: list[ProductionProcess] = field(default_factory=list)
    total_quantity: int = 0


class ProductionTracker:
    """Tracks products, their processes and the workers assigned to them.

    IDs are sequential per kind and start at 1. Process IDs are unique
    across all products.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock
        self.products: list[Product] = []
        self.workers: list[Worker] = []
        self._next_product_id = 1
        self._next_process_id = 1
        self._next_worker_id = 1

    # === Workers ===

    def add_worker(
        self,
        name: str,
        role: WorkerRole | str = WorkerRole.STAFF,
        contact: str = "",
        shift: str = "",
    ) -> Worker:
        """Register a worker. Unknown roles fall back to Staff."""
        try:
            role = WorkerRole(role)
        except ValueError:
            logger.warning("Unknown role %r for %s, defaulting to Staff", role, name)
            role = WorkerRole.STAFF

        worker = Worker(
            id=self._next_worker_id, name=name, role=role, contact=contact, shift=shift
        )
        self._next_worker_id += 1
        self.workers.append(worker)
        return worker

    def get_worker(self, worker_id: int, role: WorkerRole | None = None) -> Worker:
        for worker in self.workers:
            if worker.id == worker_id and (role is None or worker.role == role):
                return worker
        raise NotFoundError(role.value if role else "Worker", worker_id)

    # === Products and processes ===

    def create_product(
        self,
        name: str,
        description: str,
        target_date: date,
        processes: list[tuple[str, str]],
    ) -> Product:
        """Create a product with its (name, description) processes."""
        if not processes:
            raise ValueError("A product needs at least one process")

        product = Product(
            id=self._next_product_id,
            name=name,
            description=description,
            start_date=self.clock().date(),
            target_date=target_date,
        )
        self._next_product_id += 1
        for process_name, process_description in processes:
            product.processes.append(self._new_process(process_name, process_description))

        self.products.append(product)
        logger.info("Created product %s with %d processes", name, len(processes))
        return product

    def add_process(
        self, product_id: int, name: str, description: str = ""
    ) -> ProductionProcess:
        product = self.get_product(product_id)
        process = self._new_process(name, description)
        product.processes.append(process)
        return process

    def get_product(self, product_id: int) -> Product:
        for product in self.products:
            if product.id == product_id:
                return product
        raise NotFoundError("Product", product_id)

    def get_process(self, product_id: int, process_id: int) -> ProductionProcess:
        for process in self.get_product(product_id).processes:
            if process.id == process_id:
                return process
        raise NotFoundError("Process", process_id)

    def assign_workers(
        self, product_id: int, process_id: int, supervisor_id: int, staff_id: int
    ) -> ProductionProcess:
        """Assign a supervisor and a staff worker to a process."""
        process = self.get_process(product_id, process_id)
        supervisor = self.get_worker(supervisor_id, WorkerRole.SUPERVISOR)
        staff = self.get_worker(staff_id, WorkerRole.STAFF)
        process.supervisor = supervisor.name
        process.staff_worker = staff.name
        return process

    # === Status ===

    def start_process(self, product_id: int, process_id: int) -> ProductionProcess:
        process = self.get_process(product_id, process_id)
        ProcessStateMachine.validate_transition(process.status, ProcessStatus.IN_PROGRESS)
        process.status = ProcessStatus.IN_PROGRESS
        process.start_time = self.clock()
        return process

    def complete_process(
        self,
        product_id: int,
        process_id: int,
        quality_passed: bool,
        notes: str = "",
    ) -> ProductionProcess:
        process = self.get_process(product_id, process_id)
        ProcessStateMachine.validate_transition(process.status, ProcessStatus.COMPLETED)
        process.status = ProcessStatus.COMPLETED
        process.end_time = self.clock()
        process.quality_check = quality_passed
        process.notes = notes
        return process

    def add_notes(self, product_id: int, process_id: int, notes: str) -> ProductionProcess:
        process = self.get_process(product_id, process_id)
        process.notes = notes
        return process

    def record_quantity(self, product_id: int, quantity: int) -> Product:
        """Add produced units to a product.

        Completed processes record this batch's quantity.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be a positive integer")

        product = self.get_product(product_id)
        product.total_quantity += quantity
        for process in product.processes:
            if process.is_complete:
                process.quantity = quantity
        return product

    def duration(self, process: ProductionProcess) -> timedelta:
        """Time spent on a process so far."""
        if process.status == ProcessStatus.COMPLETED and process.start_time and process.end_time:
            return process.end_time - process.start_time
        if process.status == ProcessStatus.IN_PROGRESS and process.start_time:
            return self.clock() - process.start_time
        return timedelta(0)

    # === Reporting ===

    def production_report(self) -> list[dict[str, Any]]:
        """Summarize every product and its processes."""
        report = []
        for product in self.products:
            completed = [p for p in product.processes if p.is_complete]
            report.append({
                "product_id": product.id,
                "name": product.name,
                "start_date": product.start_date.isoformat(),
                "target_date": product.target_date.isoformat(),
                "total_quantity": product.total_quantity,
                "processes_total": len(product.processes),
                "processes_completed": len(completed),
                "quality_passed": sum(1 for p in completed if p.quality_check),
                "processes": [
                    {
                        "process_id": p.id,
                        "name": p.name,
                        "status": p.status.value,
                        "supervisor": p.supervisor,
                        "staff_worker": p.staff_worker,
                        "duration_seconds": self.duration(p).total_seconds(),
                    }
                    for p in product.processes
                ],
            })
        return report

    def _new_process(self, name: str, description: str) -> ProductionProcess:
        process = ProductionProcess(id=self._next_process_id, name=name, description=description)
        self._next_process_id += 1
        return process
