"""
project: Worldsmith
module: world_element.py
License: MIT

Generic world-building record. Generated dungeons are stored here verbatim as
an opaque JSON document (``detail``) keyed by a generated identifier.
"""

import datetime
import uuid

from worldsmith import db


def _new_id() -> str:
    return uuid.uuid4().hex


class WorldElement(db.Model):
    __tablename__ = "world_element"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    world_id = db.Column(db.String(64), nullable=False, index=True)
    # 'dungeon' for generated layouts; other element kinds share the table
    type = db.Column(db.String(32), nullable=False, default="dungeon")
    name = db.Column(db.String(200), nullable=False)
    summary = db.Column(db.Text, nullable=True)
    detail = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "world_id": self.world_id,
            "type": self.type,
            "name": self.name,
            "summary": self.summary,
            "detail": self.detail,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<WorldElement {self.id} type={self.type} world={self.world_id}>"
