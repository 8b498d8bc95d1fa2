"""Discord slash commands and the interaction handlers behind them."""
