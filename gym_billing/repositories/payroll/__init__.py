from gym_billing.repositories.payroll.salary_config_repository import SalaryConfigRepository
from gym_billing.repositories.payroll.salary_slip_repository import SalarySlipRepository

__all__ = ["SalaryConfigRepository", "SalarySlipRepository"]
