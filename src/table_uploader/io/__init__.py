"""I/O layer: everything that touches a database, a process or object storage."""
