"""
Sample portfolio demo: deposit, buy MSFT, buy ORCL, all priced at 1.
"""

from datetime import datetime

from lport_core import calc_port_value
from lport_core.examples.sample_portfolio import sample_portfolio, unit_pricer


def main() -> None:
    today = datetime.now()
    port = sample_portfolio(today)
    for position in port:
        print(f"{position.ticker:<6} {float(position.quantity):>12,.2f}")
    print(f"Value: {float(calc_port_value(unit_pricer, today, port)):,.2f}")


if __name__ == "__main__":
    main()
