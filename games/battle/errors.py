# games/battle/errors.py


class BattleError(Exception):
    """A rejected request. The message is sent back to the client as-is."""
    message = "Request rejected"

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def payload(self):
        return {"error": str(self)}


class RoomNotFound(BattleError):
    message = "Room not found"


class RoomFull(BattleError):
    message = "Room is full"


class RoomNotJoinable(BattleError):
    message = "Room is not joinable"


class NotEnoughPlayers(BattleError):
    message = "Need two players to start"


class BattleAlreadyStarted(BattleError):
    message = "Battle already started"


class BattleNotActive(BattleError):
    message = "Battle not active"


class PlayerNotInRoom(BattleError):
    message = "Player not in room"


class AlreadyInRoom(BattleError):
    message = "Already in a room"


class AuthError(Exception):
    def __init__(self, message="Unauthorized"):
        super().__init__(message)
