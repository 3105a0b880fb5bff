from __future__ import annotations

from dataclasses import dataclass

from taskmaster.config_utils import env_int, env_str


@dataclass(frozen=True)
class AppConfig:
    """Runtime settings for the TaskMaster app.

    Environment variables:
    - TASKMASTER_USERNAME_SUFFIX: required suffix for new usernames (default: .zehrs)
    - TASKMASTER_EMAIL_DOMAIN: domain used to derive signup emails (default: store.com)
    - TASKMASTER_AVATAR_URL: avatar template, ``{seed}`` is replaced by the user's name
    - TASKMASTER_XP_PER_LEVEL: XP needed per level (default: 1000)
    - TASKMASTER_DEFAULT_XP_REWARD: XP pre-filled on the create-mission form (default: 50)
    - TASKMASTER_BANNER_SECONDS: how long success banners stay visible (default: 4)
    """

    username_suffix: str
    email_domain: str
    avatar_url: str
    xp_per_level: int
    default_xp_reward: int
    banner_seconds: int

    DEFAULT_USERNAME_SUFFIX: str = ".zehrs"
    DEFAULT_EMAIL_DOMAIN: str = "store.com"
    DEFAULT_AVATAR_URL: str = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"
    DEFAULT_XP_PER_LEVEL: int = 1000
    DEFAULT_XP_REWARD: int = 50
    DEFAULT_BANNER_SECONDS: int = 4

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            username_suffix=env_str("TASKMASTER_USERNAME_SUFFIX", cls.DEFAULT_USERNAME_SUFFIX),
            email_domain=env_str("TASKMASTER_EMAIL_DOMAIN", cls.DEFAULT_EMAIL_DOMAIN),
            avatar_url=env_str("TASKMASTER_AVATAR_URL", cls.DEFAULT_AVATAR_URL),
            xp_per_level=env_int("TASKMASTER_XP_PER_LEVEL", cls.DEFAULT_XP_PER_LEVEL, minimum=1),
            default_xp_reward=env_int("TASKMASTER_DEFAULT_XP_REWARD", cls.DEFAULT_XP_REWARD, minimum=0),
            banner_seconds=env_int("TASKMASTER_BANNER_SECONDS", cls.DEFAULT_BANNER_SECONDS, minimum=0),
        )

    @classmethod
    def default(cls) -> "AppConfig":
        return cls(
            username_suffix=cls.DEFAULT_USERNAME_SUFFIX,
            email_domain=cls.DEFAULT_EMAIL_DOMAIN,
            avatar_url=cls.DEFAULT_AVATAR_URL,
            xp_per_level=cls.DEFAULT_XP_PER_LEVEL,
            default_xp_reward=cls.DEFAULT_XP_REWARD,
            banner_seconds=cls.DEFAULT_BANNER_SECONDS,
        )

    def avatar_for(self, seed: str) -> str:
        return self.avatar_url.replace("{seed}", seed)
