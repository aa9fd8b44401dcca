from gym_billing.services.payroll.salary_config_service import SalaryConfigService
from gym_billing.services.payroll.salary_slip_service import SalarySlipService

__all__ = ["SalaryConfigService", "SalarySlipService"]
