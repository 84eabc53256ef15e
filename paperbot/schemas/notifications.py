from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _DashboardModel(BaseModel):
    # The dashboard posts camelCase keys
    model_config = ConfigDict(populate_by_name=True)


class AlertClient(_DashboardModel):
    id: Optional[str] = None
    name: Optional[str] = None
    restaurant: Optional[str] = None
    paper_remaining: Optional[float] = Field(default=None, alias="paperRemaining")

    @property
    def display_name(self) -> str:
        return self.restaurant or self.name or "Unnamed Client"


class LowPaperAlertRequest(_DashboardModel):
    admin_chat_ids: list[int] = Field(default_factory=list, alias="adminChatIds")
    client: AlertClient
    paper_remaining: float = Field(alias="paperRemaining")
    notify_when: float = Field(alias="notifyWhen")


class LowPaperSummaryRequest(_DashboardModel):
    admin_chat_ids: list[int] = Field(default_factory=list, alias="adminChatIds")
    clients: list[AlertClient] = Field(min_length=1)


class LocationRequest(_DashboardModel):
    chat_id: int = Field(alias="chatId")
    restaurant_name: str = Field(min_length=1, alias="restaurantName")
    latitude: float
    longitude: float


class DeliveryResult(BaseModel):
    chat_id: int
    success: bool
    error: Optional[str] = None


class NotificationSummary(BaseModel):
    success: bool = True
    message: Optional[str] = None
    total_admins: int
    successful_notifications: int
    results: list[DeliveryResult]


class LocationResponse(BaseModel):
    success: bool
    message: str
