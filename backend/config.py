import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///hroof.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Client refresh cadence (seconds)
    POLL_INTERVAL_SEC = float(os.environ.get('POLL_INTERVAL_SEC', '2'))
    # Room codes are numeric strings of this length
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    MAX_TEAM_NAME_LENGTH = int(os.environ.get('MAX_TEAM_NAME_LENGTH', '64'))
    MAX_USERNAME_LENGTH = int(os.environ.get('MAX_USERNAME_LENGTH', '64'))
    # Re-read/recompute attempts after a rejected conditional write
    WRITE_RETRIES = int(os.environ.get('WRITE_RETRIES', '3'))
