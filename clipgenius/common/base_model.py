from pydantic import BaseModel, ConfigDict


class BaseClipGeniusModel(BaseModel):
    """Base Pydantic model for the ClipGenius project.

    Timeline values are immutable; operations return new instances via
    ``model_copy(update=...)``.
    """

    model_config = ConfigDict(
        frozen=True,
        revalidate_instances="always",
        validate_assignment=True,
        populate_by_name=True,
    )
