from __future__ import annotations

import re

TABLER_CSS = "https://cdn.jsdelivr.net/npm/@tabler/core@1.0.0-beta17/dist/css/tabler.min.css"
AVATAR_URL = "https://pic.sky390.cn/pics/2023/03/09/6409690ebc4df.png"
SENDER_NAME = "ChatGPT"
MESSAGE_ELEMENT_ID = "message"

_TEMPLATE_TAG = re.compile(r"</*template>")

PICTURE_TEMPLATE = """
<html>
<link rel="stylesheet" href="{css}">
<style> body {{ background-color: white; }} </style>
<div class="toast show" id="{element_id}">
  <div class="toast-header">
    <span class="avatar avatar-xs me-2" style="background-image: url({avatar})"></span>
    <strong class="me-auto">{sender}</strong>
  </div>
  <div class="toast-body">
    {body}
  </div>
</div>
</html>"""


def format_message_body(content: str) -> str:
    # Strip <template> tags until none are left; nested ones re-form after one pass.
    stripped, count = _TEMPLATE_TAG.subn("", content)
    while count:
        stripped, count = _TEMPLATE_TAG.subn("", stripped)
    return stripped.replace("\n", "<br>")


def build_picture_html(content: str) -> str:
    return PICTURE_TEMPLATE.format(
        css=TABLER_CSS,
        element_id=MESSAGE_ELEMENT_ID,
        avatar=AVATAR_URL,
        sender=SENDER_NAME,
        body=format_message_body(content),
    )
