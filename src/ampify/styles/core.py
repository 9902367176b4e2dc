from typing import Any, Callable, Dict

# (css, options) -> css
StyleTransform = Callable[[str, Dict[str, Any]], str]


class StylePlugin:
    """
    Binds a plugin name, as used in style configuration files, to its transform.
    """

    def __init__(self, name: str, transform: StyleTransform, description: str = ""):
        self.name = name
        self.transform = transform
        self.description = description

    def __call__(self, css: str, options: Dict[str, Any]) -> str:
        return self.transform(css, options)

    def __repr__(self) -> str:
        return f"StylePlugin({self.name!r})"
