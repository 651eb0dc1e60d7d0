from prometheus_client import Counter

ledger_entries_total = Counter(
    "marketformation_ledger_entries_total",
    "Total payout history entries written",
    ["entry_type"],
)

withdrawals_total = Counter(
    "marketformation_withdrawals_total", "Withdrawals by lifecycle status", ["status"]
)

proxy_verifications_total = Counter(
    "marketformation_proxy_verifications_total",
    "Signed proxy request verifications",
    ["result"],
)

webhook_line_items_total = Counter(
    "marketformation_webhook_line_items_total",
    "Order webhook line items by outcome",
    ["outcome"],
)
