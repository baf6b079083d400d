from decimal import Decimal
from typing import List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = Field("NetPayCalculator", description="Logger namespace and page title")
    LOG_LEVEL: str = Field("INFO", description="Root level for netpay loggers")
    LOG_PATH: str = Field("./data/logs", description="Directory for rotating log files")
    CURRENCY: str = Field("KES", description="Currency code used on payslips and band labels")

    # Input limits (form and batch uploads)
    MAX_INPUT_AMOUNT: Decimal = Field(Decimal("100000000"), description="Largest amount accepted in any field")

    # NSSF employee contribution, Tier I up to 8,000 and Tier II up to 72,000
    NSSF_RATE: Decimal = Decimal("0.06")
    NSSF_TIER_1_UPPER: Decimal = Decimal("8000")
    NSSF_TIER_2_UPPER: Decimal = Decimal("72000")

    # SHIF (Social Health Insurance Fund), flat rate with a monthly floor
    SHIF_RATE: Decimal = Decimal("0.0275")
    SHIF_MINIMUM: Decimal = Decimal("300")

    # Affordable Housing Levy
    HOUSING_LEVY_RATE: Decimal = Decimal("0.015")

    # Allowable voluntary deductions (monthly caps)
    PENSION_DEDUCTION_CAP: Decimal = Decimal("30000")
    MORTGAGE_INTEREST_CAP: Decimal = Decimal("25000")
    MEDICAL_FUND_CAP: Decimal = Decimal("15000")

    # PAYE (Kenya, monthly). A None ceiling marks the open top band.
    PAYE_BANDS: List[Tuple[Optional[Decimal], Decimal]] = [
        (Decimal("24000"), Decimal("0.10")),
        (Decimal("32333"), Decimal("0.25")),
        (Decimal("500000"), Decimal("0.30")),
        (Decimal("800000"), Decimal("0.325")),
        (None, Decimal("0.35")),
    ]
    PERSONAL_RELIEF_MONTHLY: Decimal = Decimal("2400")

settings = Settings()
