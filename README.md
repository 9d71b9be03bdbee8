# tradedesk

The state behind a trading desk, kept in plain Python objects with no user
interface attached. Market data, broker connections and storage are passed
in as callables, so every part can be driven and tested on its own.

## What is in it

- `tradedesk.models`: the shared enumerations (`DataType`, `StrategyStatus`,
  `Side`, `RequestType`, `OrderStatus`) and records (`OrderInfo`,
  `ParameterValue`, `ParameterInfo`, `StrategyRow`, `GlobalParameterInfo`,
  `PortfolioStatus`).
- `tradedesk.order_book`:
  - `OrderBook` is a named list of trades, returned newest first.
  - `OrderHistory` holds the history of one order number, fetched through a
    loader callable.
- `tradedesk.open_orders.OpenOrders`: open orders keyed by gateway id and
  ordered by time, with buy and sell counts.
  - Single cancels and "cancel all" both go through a cancel callback.
    "Cancel all" covers manual orders, whose portfolio number ends in 9999.
  - `is_modifiable` and `is_cancellable_in_bulk` hold the portfolio-number
    rules.
- `tradedesk.order_form.OrderForm`: the manual order form.
  - Price is clamped at zero and quantity at the lot size.
  - Client and order type may only be chosen for a new order.
  - `submit` publishes the order as `RequestType.NEW` or `RequestType.MODIFY`.
- `tradedesk.position.Position`: symbol-wise and PF-wise net books built from
  trades, plus a greek book.
  - `apply_trade` and `calculate_pnl` work on a single entry.
  - `greek_summary` aggregates greeks and MTM per symbol.
  - `update_net_pnl` is the periodic refresh.
- `tradedesk.parameters`: combo option helpers (`combo_option`,
  `combo_labels`), `snapshot_parameters` and `display_value`.
- `tradedesk.portfolio_interface.PortfolioInterface`: the strategy rows of one
  portfolio.
  - Subscribe, apply and unsubscribe, for all rows or only the selected ones.
  - Global parameter updates with `update_all`.
  - `check_any_active`, JSON `export_rows` / `import_rows`, and `status_color`.
- `tradedesk.portfolio.Portfolio`: a portfolio tab.
  - Appending rows, queued scanner rows and selection handling.
  - Deleting the selection and applying global parameters.
  - Closing, which is refused while any row still runs.
- `tradedesk.scanner.PortfolioScanner`: builds scanner formulas from the
  selected functions, which are bound to variables A, B, C, and so on. Saved
  formulas can be exported to JSON and imported again.
- `tradedesk.template_builder.TemplateBuilder`: edits a strategy's parameter
  template and reads or writes it as JSON. `default_value` gives the starting
  value for each type.
- `tradedesk.workspace.StrategyWorkspace`: named portfolios, saved as a JSON
  map from workspace name to strategy name.

## Install

```
pip install .
```

## Examples

Positions and PNL:

```python
from tradedesk.models import OrderInfo, Side
from tradedesk.position import NetBookCalculation, Position

prices = {42: 105.0}
position = Position(last_price=prices.__getitem__)
position.insert(OrderInfo(gateway=1, token=42, pf=1, side=Side.BUY, price=100.0, quantity=50))
position.process_pending()

print(position.symbol_wise_rows()[0].total_qty)             # 50
print(position.update_net_pnl(NetBookCalculation.SYMBOL))   # 250.0
```

A portfolio with one integer parameter:

```python
from tradedesk.portfolio import Portfolio

config = '{"Name":"Spread","Params":{"Qty":{"Value":"50","DataType":0}}}'
sent = []
portfolio = Portfolio("Desk", "Spread", config,
                      strategy_action=lambda row, name, kind: sent.append((row.pf, name, kind)))
row = portfolio.append_strategy()
portfolio.subscribe_all()
print(row.status, sent)
```

By default, `post` runs each strategy action straight away. To hand the
action to another thread or event loop, pass a `post` callable of your own.

Updates queued with `insert`, `add_scanner_portfolio` and similar calls do not
take effect until `process_pending` is called. Each call applies one queued
update.

Portfolio numbers (`pf`) are shared by every portfolio in the process.

## What it does not do

- There are no windows, tables or popups. The classes hold the state and the
  rules, and a front end has to be built on top of them.
- There is no broker or exchange connection and no market data feed. Orders,
  cancels and strategy actions leave through callbacks that you supply, and
  prices reach `Position` the same way.
- There is no contract database or order-history store. The `OrderHistory`
  loader and the `Position` lookups (`symbol_of`, `greek_info`,
  `top_of_book`) must be provided.
- There is no option-pricing model. `Position.update_net_pnl` with
  `NetBookCalculation.GREEK` needs a `greeks_model` callable. Without one it
  raises `RuntimeError`.
- Scanner formulas are built and stored, but nothing here evaluates them.
- There is no command-line program.

## Tests

```
pip install .[test]
pytest
```