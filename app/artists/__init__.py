"""
Artists application.

Holds the Artist entity and its embedded wallet balance. The subscription
reconciliation flow credits an artist's share through
ArtistWalletService.credit(); nothing else writes wallet_balance.
"""
