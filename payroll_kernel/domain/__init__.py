"""Pure domain layer: clock, calendar, DTOs and payroll arithmetic (zero I/O)."""
