from pygments.style import Style
from pygments.token import Keyword, Name, Number, Punctuation, String


class LogStyle(Style):
    styles = {
        Punctuation: "#888888",
        Name.Tag: "#5f87d7",
        String: "#87af5f",
        Number: "#d7875f",
        Keyword.Constant: "#af87d7",
    }
