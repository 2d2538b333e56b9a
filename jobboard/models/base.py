from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from jobboard.utils.errors import InvalidRequest


class MongoBaseModel(BaseModel):
    """Common base for documents stored in MongoDB.

    Enum fields are kept as their plain values so documents can be handed to
    the driver as-is.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    id: Optional[ObjectId] = Field(default=None, alias="_id")

    @classmethod
    def from_mongo(cls, document):
        if document is None:
            return None
        return cls.model_validate(document)

    def to_mongo(self) -> dict:
        data = self.model_dump(by_alias=True)
        if data.get("_id") is None:
            data.pop("_id", None)
        return data


def to_object_id(value: str, label: str = "job") -> ObjectId:
    """Parse a path id, rejecting malformed values with a 400."""
    if not ObjectId.is_valid(value):
        raise InvalidRequest(f"Invalid {label} ID")
    return ObjectId(value)
