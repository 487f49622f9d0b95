from hroof import db
import json


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.String(16), primary_key=True)
    green_team_name = db.Column(db.String(128), nullable=False)
    red_team_name = db.Column(db.String(128), nullable=False)
    current_state = db.Column(db.Text, nullable=False)  # JSON-encoded board state
    current_team = db.Column(db.String(8), nullable=False, default='green')
    winner = db.Column(db.String(8), nullable=True)
    version = db.Column(db.Integer, nullable=False, default=0)
    buzzer = db.relationship('BuzzerState', back_populates='game', uselist=False,
                             cascade='all, delete-orphan')
    players = db.relationship('Player', back_populates='game', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'green_team_name': self.green_team_name,
            'red_team_name': self.red_team_name,
            'current_state': json.loads(self.current_state) if self.current_state else None,
            'current_team': self.current_team,
            'winner': self.winner,
            'version': self.version,
        }


class BuzzerState(db.Model):
    __tablename__ = 'buzzer_state'
    game_id = db.Column(db.String(16), db.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True)
    active = db.Column(db.Boolean, nullable=False, default=True)
    buzzed_team = db.Column(db.String(8), nullable=True)
    buzzed_player = db.Column(db.String(128), nullable=True)
    buzzed_at = db.Column(db.String(40), nullable=True)  # ISO-8601 UTC
    version = db.Column(db.Integer, nullable=False, default=0)
    game = db.relationship('Game', back_populates='buzzer')

    def to_dict(self):
        return {
            'game_id': self.game_id,
            'active': bool(self.active),
            'buzzed_team': self.buzzed_team,
            'buzzed_player': self.buzzed_player,
            'buzzed_at': self.buzzed_at,
            'version': self.version,
        }


class Player(db.Model):
    __tablename__ = 'player'
    __table_args__ = (db.UniqueConstraint('game_id', 'username', name='uq_player_game_username'),)
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.String(16), db.ForeignKey('game.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    username = db.Column(db.String(128), nullable=False)
    team = db.Column(db.String(8), nullable=False)
    game = db.relationship('Game', back_populates='players')

    def to_dict(self):
        return {
            'game_id': self.game_id,
            'username': self.username,
            'team': self.team,
        }
