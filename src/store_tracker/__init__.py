"""Store tracker: users, purchases and spending analytics."""
