class GameError(Exception):
    pass


class AnswerAlreadySubmittedError(GameError):
    pass


class QuestionNotFoundError(GameError):
    pass


class CampaignNotFoundError(GameError):
    pass


class PlayerNotFoundError(GameError):
    pass


class TeamNotFoundError(GameError):
    pass


class InvalidAnswerOptionError(GameError):
    pass


class CampaignValidationError(GameError):
    pass


class TeamNameTakenError(GameError):
    pass
