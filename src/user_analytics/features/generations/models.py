"""Data models for content generation: templates and generation events.

Only the analytics reports read these tables; rows are produced by the
generation workers elsewhere."""

from tortoise import fields
from ...common.models import TrackedModel

GENERATION_TYPE_PREVIEW = "preview"
GENERATION_TYPE_PAID = "paid"


class Template(TrackedModel):
    name = fields.CharField(max_length=255)
    description = fields.TextField(null=True)

    generations: fields.ReverseRelation["Generation"]

    def __str__(self):
        return self.name

    class Meta:
        table = "templates"


class Generation(TrackedModel):
    user: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="generations", on_delete=fields.CASCADE
    )
    template: fields.ForeignKeyNullableRelation[Template] = fields.ForeignKeyField(
        "models.Template", related_name="generations", on_delete=fields.SET_NULL, null=True
    )

    generation_type = fields.CharField(
        max_length=20, default=GENERATION_TYPE_PREVIEW, description="preview or paid"
    )
    is_paid = fields.BooleanField(default=False)
    status = fields.CharField(max_length=50, default="pending")
    processing_time = fields.IntField(null=True, description="Seconds spent rendering")
    payment_amount = fields.FloatField(null=True)

    def __str__(self):
        return f"Generation {self.public_id} ({self.generation_type}, {self.status})"

    class Meta:
        table = "generations"
