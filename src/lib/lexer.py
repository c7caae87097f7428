"""
Custom Pygments lexer for termdown deck source

Highlights termdown markdown when a slide shows deck source as a code
example (```termdown or ```td fences).

Token types:
- Keyword.Declaration: Slide delimiters (---, ___, ***) and ||| separators
- Generic.Heading / Generic.Subheading: # title, ## section, ### header
- Name.Attribute: Override keys in <!-- key: value --> comments
- Literal.String: Override and frontmatter values
- Name.Decorator: The <!-- intentionally blank --> marker
- Literal.Number: Progressive (*) bullets
- Name.Function: Image references
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Generic,
    Number,
)


class DeckLexer(RegexLexer):
    """
    Lexer for termdown decks

    Example:
        ## Agenda
        <!-- pagination: false -->
        * first point

    Tokens:
        ## Agenda → Generic.Subheading
        <!-- → Comment
        pagination → Name.Attribute
        false → Literal.String
        * → Literal.Number
    """

    name = 'Termdown'
    aliases = ['termdown', 'td']
    filenames = ['*.td.md']

    tokens = {
        'root': [
            # Blank slide marker
            (r'<!--\s*intentionally\s+blank\s*-->', Name.Decorator),

            # Override comments <!-- key: value -->
            (r'(<!--)(\s*)([A-Za-z][\w-]*)(\s*:\s*)(.*?)(\s*-->)',
             bygroups(Comment, Text, Name.Attribute, Punctuation, Literal.String, Comment)),

            # Other HTML comments
            (r'<!--.*?-->', Comment),

            # Slide delimiters and column separators (whole lines)
            (r'^(---|___|\*\*\*)[ \t]*$', Keyword.Declaration),
            (r'^[ \t]*\|\|\|[ \t]*$', Keyword.Declaration),

            # Headings
            (r'^###[ \t].*$', Generic.Heading),
            (r'^##[ \t].*$', Generic.Subheading),
            (r'^#[ \t].*$', Generic.Heading),

            # Bullets: progressive (*) and static (-)
            (r'^([ \t]*)(\*)([ \t])', bygroups(Text, Number, Text)),
            (r'^([ \t]*)(-)([ \t])', bygroups(Text, Punctuation, Text)),

            # Images with optional {width=N}
            (r'(!\[)([^\]]*)(\]\()([^)\s]+)(\))(\{width=\d+\})?',
             bygroups(Punctuation, String, Punctuation, Name.Function, Punctuation, Name.Attribute)),

            # Frontmatter style key: value lines
            (r'^([a-z][\w-]*)(:)([ \t]+)(.+)$',
             bygroups(Name.Attribute, Punctuation, Text, Literal.String)),

            # Inline emphasis and code
            (r'\*\*[^*\n]+\*\*', Generic.Strong),
            (r'`[^`\n]+`', String.Backtick),

            # Everything else is text
            (r'[^<!*`\n-]+', Text),
            (r'\n', Text),
            (r'.', Text),
        ],
    }
