class AttendanceError(Exception):
    """勤怠エージェントの基底例外"""


class ConfigurationError(AttendanceError):
    """必須の設定・認証情報が不足している（通信前に検出）"""


class AuthenticationError(AttendanceError):
    """ログインが拒否された"""


class RemoteQueryError(AttendanceError):
    """打刻状態・祝日・休暇申請の取得に失敗した"""


class RemoteMutationError(AttendanceError):
    """打刻の送信に失敗した"""
