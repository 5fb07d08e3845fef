from sqlalchemy import Column, DateTime, Integer, String, Text, func

from database import Base


class InvestmentApplication(Base):
    __tablename__ = "investors"

    id = Column(String(64), primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False)
    email = Column(String(320), nullable=False, index=True)
    investment_amount = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)
    projected_return = Column(Integer, nullable=False)
    account_name = Column(String(255), nullable=False)
    bank_name = Column(String(255), nullable=False)
    account_number = Column(String(32), nullable=False)
    # Inline data URL of the receipt image, or "" when none was uploaded
    payment_screenshot_url = Column(Text, nullable=False, default="")
    transaction_reference = Column(String(255), nullable=False, default="")
    status = Column(String(32), nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
