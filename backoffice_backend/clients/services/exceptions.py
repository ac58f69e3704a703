# clients/services/exceptions.py

from core.exceptions import NotFoundError


class ClientNotFoundError(NotFoundError):
    def __init__(self, client_id):
        self.client_id = str(client_id)
        super().__init__(f"Client {self.client_id} not found", clientId=self.client_id)
