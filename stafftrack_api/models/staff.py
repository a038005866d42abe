from stafftrack_api.common.timeutil import utcnow
from stafftrack_api.extensions import db


class StaffMember(db.Model):
    __tablename__ = "staff_members"

    id = db.Column(db.Integer, primary_key=True)
    user_id   = db.Column(db.String(32), unique=True, nullable=False)   # platform user id
    username  = db.Column(db.String(80), nullable=False)
    rank      = db.Column(db.Integer, nullable=False)
    rank_name = db.Column(db.String(80), nullable=False)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "username": self.username,
            "rank": self.rank,
            "rank_name": self.rank_name,
            "joined_at": self.joined_at.isoformat() if self.joined_at else None,
        }
