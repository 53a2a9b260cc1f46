"""Generation request bookkeeping: one row per request plus its step log."""

import datetime
import uuid

from worldsmith import db


class GenerationRequest(db.Model):
    __tablename__ = "generation_request"

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    world_id = db.Column(db.String(64), nullable=False, index=True)
    kind = db.Column(db.String(32), nullable=False, default="dungeon")
    # Request parameters as received (after coercion)
    prompt = db.Column(db.JSON, nullable=False, default=dict)
    model = db.Column(db.String(64), nullable=False, default="procedural")
    # 'pending' | 'completed' | 'failed'
    status = db.Column(db.String(16), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def __repr__(self):
        return f"<GenerationRequest {self.id} kind={self.kind} status={self.status}>"


class GenerationLog(db.Model):
    __tablename__ = "generation_log"

    id = db.Column(db.Integer, primary_key=True)
    request_id = db.Column(db.String(32), db.ForeignKey("generation_request.id"), nullable=False, index=True)
    world_id = db.Column(db.String(64), nullable=True)
    step = db.Column(db.String(64), nullable=False)
    # 'info' | 'warning' | 'error' | 'debug'
    log_type = db.Column(db.String(16), nullable=False, default="info")
    message = db.Column(db.Text, nullable=False)
    data = db.Column(db.JSON, nullable=True)
    duration_ms = db.Column(db.Integer, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "request_id": self.request_id,
            "world_id": self.world_id,
            "step": self.step,
            "log_type": self.log_type,
            "message": self.message,
            "data": self.data,
            "duration_ms": self.duration_ms,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
