"""Service layer exports."""

from . import (
	assignment_service,
	auth_service,
	backup_service,
	dashboard_service,
	ledger,
	seed_service,
	store,
	student_service,
	writer_service,
)

__all__ = [
	"assignment_service",
	"auth_service",
	"backup_service",
	"dashboard_service",
	"ledger",
	"seed_service",
	"store",
	"student_service",
	"writer_service",
]
