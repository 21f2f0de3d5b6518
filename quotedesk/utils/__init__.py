"""utils/ — pure helpers shared by the service and the client."""
