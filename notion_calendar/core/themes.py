from pydantic import BaseModel


class ThemePreset(BaseModel):
    key: str
    name: str
    background: str
    primary: str
    accent: str


THEME_PRESETS = [
    ThemePreset(key="pastel", name="파스텔톤", background="#FFFCF9", primary="#B5E3F0", accent="#FFB8CC"),
    ThemePreset(key="pink", name="핑크", background="#FFF5F8", primary="#F19CB6", accent="#C9184A"),
    ThemePreset(key="black", name="블랙", background="#1E1E1E", primary="#4A4A4A", accent="#E8E8E8"),
    ThemePreset(key="white-black", name="화이트+블랙", background="#FFFFFF", primary="#2D2D2D", accent="#FF758C"),
    ThemePreset(key="purple", name="보라", background="#F8F5FF", primary="#B97FE7", accent="#5A189A"),
    ThemePreset(key="green", name="그린", background="#F5FBF7", primary="#66C497", accent="#2D6A4F"),
    ThemePreset(key="blue", name="블루", background="#F5FAFF", primary="#5FA3EE", accent="#1E3A8A"),
    ThemePreset(key="yellow", name="노랑", background="#FFFEF5", primary="#FCD34D", accent="#F59E0B"),
]


def get_preset(key: str) -> ThemePreset | None:
    return next((preset for preset in THEME_PRESETS if preset.key == key), None)


def hex_with_opacity(color: str, opacity: int) -> str:
    """Return ``color`` as an ``rgba()`` string; non-hex values pass through."""
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        return color
    try:
        red, green, blue = (int(value[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return color
    alpha = max(0, min(100, opacity)) / 100
    return f"rgba({red}, {green}, {blue}, {alpha:g})"
