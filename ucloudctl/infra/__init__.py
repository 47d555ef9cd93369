from ucloudctl.infra.http import HttpClient, HttpError

__all__ = ["HttpClient", "HttpError"]
