# backend/portfolio_dashboard/data/holdings.py
from typing import List

from portfolio_dashboard.models.portfolio import Exchange, Holding

# Seed portfolio used when a request does not supply its own holdings
DEFAULT_HOLDINGS: List[Holding] = [
    # Technology
    Holding(sector="Technology", particulars="Infosys Ltd", purchase_price=1450.75,
            quantity=15, exchange=Exchange.NSE, ticker="INFY.NS"),
    Holding(sector="Technology", particulars="Tata Consultancy Services Ltd", purchase_price=3250.50,
            quantity=8, exchange=Exchange.NSE, ticker="TCS.NS"),
    Holding(sector="Technology", particulars="Microsoft Corporation", purchase_price=320.75,
            quantity=5, exchange=Exchange.NASDAQ, ticker="MSFT"),

    # Finance
    Holding(sector="Finance", particulars="HDFC Bank Ltd", purchase_price=1620.25,
            quantity=12, exchange=Exchange.NSE, ticker="HDFCBANK.NS"),
    Holding(sector="Finance", particulars="ICICI Bank Ltd", purchase_price=875.50,
            quantity=20, exchange=Exchange.NSE, ticker="ICICIBANK.NS"),

    # Healthcare
    Holding(sector="Healthcare", particulars="Dr. Reddy's Laboratories Ltd", purchase_price=4750.25,
            quantity=4, exchange=Exchange.NSE, ticker="DRREDDY.NS"),
    Holding(sector="Healthcare", particulars="Pfizer Inc", purchase_price=42.75,
            quantity=10, exchange=Exchange.NYSE, ticker="PFE"),

    # Consumer Goods
    Holding(sector="Consumer Goods", particulars="Hindustan Unilever Ltd", purchase_price=2450.75,
            quantity=7, exchange=Exchange.BSE, ticker="HINDUNILVR.BO"),
    Holding(sector="Consumer Goods", particulars="ITC Ltd", purchase_price=375.25,
            quantity=30, exchange=Exchange.NSE, ticker="ITC.NS"),
]
