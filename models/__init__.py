from models.application import InvestmentApplication

__all__ = [
    "InvestmentApplication",
]
