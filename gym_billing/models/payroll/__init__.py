"""Trainer salary configuration and slips."""
from gym_billing.models.payroll.trainer_salary_config import TrainerSalaryConfig
from gym_billing.models.payroll.trainer_salary_slip import TrainerSalarySlip

__all__ = ["TrainerSalaryConfig", "TrainerSalarySlip"]
