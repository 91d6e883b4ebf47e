"""SQLite connection and schema helpers shared by the account and task stores."""
