from dextvl.sdk.api import SdkApi

__all__ = ["SdkApi"]
