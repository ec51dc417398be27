from __future__ import annotations

import logging

from suite_money import ExchangeBank, FormatOption, Money, MoneyParser
from suite_money.config import MoneySettings
from suite_money.domain.monetary.currency_registry import CurrencyRegistry


logger = logging.getLogger(__name__)


def run() -> None:
    # Registry is loaded once and shared read-only
    registry = CurrencyRegistry.load()

    # Bank holds one-way rates; the reverse rate is registered separately
    bank = ExchangeBank(registry)
    bank.add_rate("USD", "CAD", "1.24515")
    bank.add_rate("CAD", "USD", "0.803115")

    parser = MoneyParser(registry, bank, MoneySettings(assume_from_symbol=True))

    price = parser.parse("$19.99")
    shipping = parser.parse("5.00 CAD")
    total = price + shipping

    logger.info(f"Price: {price.format(FormatOption.WITH_CURRENCY)}")
    logger.info(f"Shipping: {shipping.format(FormatOption.WITH_CURRENCY)}")
    logger.info(f"Total: {total.format(FormatOption.WITH_CURRENCY)}")
    logger.info(f"Total in CAD: {total.exchange_to('CAD').format(FormatOption.WITH_CURRENCY, FormatOption.HTML)}")
    logger.info(f"Gift card: {Money.empty('USD', bank, registry).format()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
