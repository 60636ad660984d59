from __future__ import annotations

from app.schemas.stocks import Instrument, Sector


def _foreign(symbol: str, name: str) -> Instrument:
    return Instrument(symbol=symbol, name=name, market="foreign")


def _domestic(symbol: str, name: str) -> Instrument:
    return Instrument(symbol=symbol, name=name, market="domestic")


# US listings (including Argentine ADRs) are foreign, BYMA (.BA) listings domestic.
SECTORS: list[Sector] = [
    Sector(
        name="ETF's",
        stocks=[
            _foreign("SPY", "S&P 500 ETF"),
            _foreign("QQQ", "Nasdaq 100 ETF"),
            _foreign("DIA", "Dow Jones ETF"),
            _foreign("IWM", "Russell 2000 ETF"),
            _foreign("ARKK", "ARK Innovation"),
            _foreign("GDX", "Gold Miners ETF"),
            _foreign("ITA", "Aerospace & Defense"),
            _foreign("IEUR", "iShares Europe"),
            _foreign("EEM", "Emerging Markets"),
            _foreign("EWJ", "Japan ETF"),
            _foreign("EWZ", "Brazil ETF"),
            _foreign("FXI", "China Large-Cap"),
            _foreign("GLD", "Gold ETF"),
            _foreign("SLV", "Silver ETF"),
            _foreign("IBIT", "Bitcoin ETF"),
            _foreign("ETHA", "Ethereum ETF"),
        ],
    ),
    Sector(
        name="Technology",
        stocks=[
            _foreign("AAPL", "Apple"),
            _foreign("MSFT", "Microsoft"),
            _foreign("GOOGL", "Alphabet"),
            _foreign("META", "Meta Platforms"),
            _foreign("NVDA", "NVIDIA"),
            _foreign("TSLA", "Tesla"),
            _foreign("AMD", "AMD"),
            _foreign("INTC", "Intel"),
            _foreign("CRM", "Salesforce"),
            _foreign("ORCL", "Oracle"),
            _foreign("ADBE", "Adobe"),
            _foreign("AVGO", "Broadcom"),
            _foreign("CSCO", "Cisco"),
            _foreign("QCOM", "Qualcomm"),
            _foreign("TXN", "Texas Instruments"),
            _foreign("SNOW", "Snowflake"),
            _foreign("PLTR", "Palantir"),
        ],
    ),
    Sector(
        name="Energy",
        stocks=[
            _foreign("XOM", "Exxon Mobil"),
            _foreign("CVX", "Chevron"),
            _foreign("COP", "ConocoPhillips"),
            _foreign("SLB", "Schlumberger"),
            _foreign("EOG", "EOG Resources"),
            _foreign("MPC", "Marathon Petroleum"),
            _foreign("PSX", "Phillips 66"),
            _foreign("VLO", "Valero Energy"),
        ],
    ),
    Sector(
        name="Financial",
        stocks=[
            _foreign("JPM", "JPMorgan Chase"),
            _foreign("BAC", "Bank of America"),
            _foreign("WFC", "Wells Fargo"),
            _foreign("GS", "Goldman Sachs"),
            _foreign("MS", "Morgan Stanley"),
            _foreign("C", "Citigroup"),
            _foreign("BLK", "BlackRock"),
            _foreign("AXP", "American Express"),
            _foreign("V", "Visa"),
            _foreign("MA", "Mastercard"),
            _foreign("PYPL", "PayPal"),
        ],
    ),
    Sector(
        name="Communication Services",
        stocks=[
            _foreign("T", "AT&T"),
            _foreign("VZ", "Verizon"),
            _foreign("CMCSA", "Comcast"),
            _foreign("NFLX", "Netflix"),
            _foreign("DIS", "Disney"),
            _foreign("TMUS", "T-Mobile"),
        ],
    ),
    Sector(
        name="Consumer Cyclical",
        stocks=[
            _foreign("AMZN", "Amazon"),
            _foreign("HD", "Home Depot"),
            _foreign("MCD", "McDonald's"),
            _foreign("NKE", "Nike"),
            _foreign("SBUX", "Starbucks"),
            _foreign("TGT", "Target"),
            _foreign("LOW", "Lowe's"),
            _foreign("F", "Ford"),
            _foreign("GM", "General Motors"),
        ],
    ),
    Sector(
        name="Consumer Defensive",
        stocks=[
            _foreign("WMT", "Walmart"),
            _foreign("PG", "Procter & Gamble"),
            _foreign("KO", "Coca-Cola"),
            _foreign("PEP", "PepsiCo"),
            _foreign("COST", "Costco"),
            _foreign("PM", "Philip Morris"),
        ],
    ),
    Sector(
        name="HealthCare",
        stocks=[
            _foreign("UNH", "UnitedHealth"),
            _foreign("JNJ", "Johnson & Johnson"),
            _foreign("LLY", "Eli Lilly"),
            _foreign("ABBV", "AbbVie"),
            _foreign("MRK", "Merck"),
            _foreign("PFE", "Pfizer"),
            _foreign("TMO", "Thermo Fisher"),
            _foreign("DHR", "Danaher"),
            _foreign("CVS", "CVS Health"),
        ],
    ),
    Sector(
        name="Industrials",
        stocks=[
            _foreign("BA", "Boeing"),
            _foreign("CAT", "Caterpillar"),
            _foreign("GE", "General Electric"),
            _foreign("UPS", "UPS"),
            _foreign("HON", "Honeywell"),
            _foreign("RTX", "Raytheon"),
            _foreign("LMT", "Lockheed Martin"),
            _foreign("DE", "Deere & Company"),
        ],
    ),
    Sector(
        name="Basic Materials",
        stocks=[
            _foreign("LIN", "Linde"),
            _foreign("APD", "Air Products"),
            _foreign("ECL", "Ecolab"),
            _foreign("DD", "DuPont"),
            _foreign("NEM", "Newmont"),
            _foreign("FCX", "Freeport-McMoRan"),
        ],
    ),
    Sector(
        name="Argentina - Energy",
        stocks=[
            _foreign("YPF", "YPF"),
            _domestic("YPFD.BA", "YPF"),
            _domestic("TGSU2.BA", "Transportadora Gas Sur"),
            _domestic("TGNO4.BA", "Transportadora Gas Norte"),
            _domestic("CGPA2.BA", "Camuzzi Gas Pampeana"),
        ],
    ),
    Sector(
        name="Argentina - Financial",
        stocks=[
            _foreign("GGAL", "Grupo Galicia"),
            _foreign("BMA", "Banco Macro"),
            _domestic("GGAL.BA", "Grupo Galicia"),
            _domestic("BMA.BA", "Banco Macro"),
            _domestic("COME.BA", "Banco Comafi"),
            _domestic("BBAR.BA", "Banco BBVA"),
            _domestic("SUPV.BA", "Banco Supervielle"),
        ],
    ),
    Sector(
        name="Argentina - Utilities",
        stocks=[
            _foreign("EDN", "Edenor"),
            _foreign("PAM", "Pampa Energía"),
            _domestic("EDN.BA", "Edenor"),
            _domestic("PAMP.BA", "Pampa Energía"),
            _domestic("CECO2.BA", "Central Costanera"),
            _domestic("CEPU.BA", "Central Puerto"),
        ],
    ),
    Sector(
        name="Argentina - Telecom & Tech",
        stocks=[
            _foreign("TEO", "Telecom Argentina"),
            _foreign("LOMA", "Loma Negra"),
            _domestic("TECO2.BA", "Telecom Argentina"),
            _domestic("LOMA.BA", "Loma Negra"),
            _domestic("MIRG.BA", "Mirgor"),
        ],
    ),
    Sector(
        name="Argentina - Consumer & Industrial",
        stocks=[
            _domestic("ALUA.BA", "Aluar"),
            _domestic("TXAR.BA", "Ternium"),
            _domestic("CRES.BA", "Cresud"),
            _domestic("AGRO.BA", "Agrometal"),
            _domestic("IRSA.BA", "IRSA"),
            _domestic("BYMA.BA", "BYMA"),
        ],
    ),
]


def all_instruments(sectors: list[Sector] | None = None) -> list[Instrument]:
    """Flatten the sector groupings, keeping the first occurrence of each symbol."""
    instruments: dict[str, Instrument] = {}
    for sector in sectors if sectors is not None else SECTORS:
        for stock in sector.stocks:
            instruments.setdefault(stock.symbol, stock)
    return list(instruments.values())


def find_instrument(symbol: str) -> Instrument | None:
    normalized = symbol.strip().upper()
    for instrument in all_instruments():
        if instrument.symbol.upper() == normalized:
            return instrument
    return None
