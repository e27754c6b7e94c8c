from hms.domain.calculations.contamination import contamination_rate, format_rate, rate_for_area
from hms.domain.calculations.dosage import frequency_label, quantity, schedule_for_frequency
from hms.domain.calculations.fluid_balance import FluidBalance, aggregate
from hms.domain.calculations.service_due import days_until, next_due_date, service_status

__all__ = [
    "FluidBalance",
    "aggregate",
    "contamination_rate",
    "days_until",
    "format_rate",
    "frequency_label",
    "next_due_date",
    "quantity",
    "rate_for_area",
    "schedule_for_frequency",
    "service_status",
]
