"""Book CRUD handlers served through Lambda Function URLs."""
