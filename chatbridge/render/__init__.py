from .hooks import BeforeSendHook, HtmlRenderer, OutboundPipeline, Outgoing, PictureModeHook
from .template import build_picture_html

__all__ = [
    "BeforeSendHook",
    "HtmlRenderer",
    "OutboundPipeline",
    "Outgoing",
    "PictureModeHook",
    "build_picture_html",
]
