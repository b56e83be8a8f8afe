from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from imperial.actions import Action
from imperial.nations import Nation
from imperial.player import PlayerDescriptor


class PlayerDescriptorModel(BaseModel):
    id: str
    nation: Optional[Nation] = None

    def to_descriptor(self) -> PlayerDescriptor:
        return PlayerDescriptor(self.id, self.nation)


class CreateGameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    players: List[PlayerDescriptorModel] = Field(min_length=1, max_length=6)
    solo_mode: bool = Field(default=False, alias="soloMode")


class CreateGameResponse(BaseModel):
    game_id: str = Field(serialization_alias="gameId")


class ActionModel(BaseModel):
    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)

    def to_action(self) -> Action:
        return Action.from_dict(self.model_dump())


class ActionResponse(BaseModel):
    accepted: bool
    legal_action_count: int


class LegalActionsResponse(BaseModel):
    game_id: str
    current_player: Optional[str] = None
    actions: List[Dict[str, Any]]


class LogResponse(BaseModel):
    game_id: str
    log: List[Dict[str, Any]]
    annotated_log: List[Dict[str, Any]]
