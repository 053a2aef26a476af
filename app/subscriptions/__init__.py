"""
Subscriptions application.

Artist subscription plans, the user subscription lifecycle, payment
webhook reconciliation and the per-currency platform wallet ledger.

Key components:
    - PlanCatalogService: create, list and deactivate plans
    - SubscriptionLifecycleService: subscribe (saga), cancel at period end
    - PaymentReconciliationService: verify and apply provider webhooks
    - ledger: WalletLedgerService singleton, sole writer of PlatformWallet
    - PaymentProviderAdapter: outbound calls to the payment provider
"""
