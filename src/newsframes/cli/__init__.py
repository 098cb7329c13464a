"""newsframes command line interface."""
