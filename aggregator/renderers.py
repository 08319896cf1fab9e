from rest_framework.renderers import JSONRenderer


class HTMLSafeJSONRenderer(JSONRenderer):
    """
    JSON renderer that escapes <, > and & so the body is safe to embed in HTML.

    The standard JSONRenderer already escapes U+2028 and U+2029.
    """

    ESCAPES = (
        (b"<", b"\\u003c"),
        (b">", b"\\u003e"),
        (b"&", b"\\u0026"),
    )

    def render(self, data, accepted_media_type=None, renderer_context=None):
        ret = super().render(data, accepted_media_type, renderer_context)
        for char, escaped in self.ESCAPES:
            ret = ret.replace(char, escaped)
        return ret
