"""Database access: connections, script execution and database builds."""
