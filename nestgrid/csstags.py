import logging
logger = logging.getLogger(__name__)


class TableCssTags:
    r"""
    Maps schema table ids to style tags (e.g. CSS class name suffixes).

    Tags given explicitly in `tags` take precedence.  Other tables get a tag
    from `palette` according to their nesting depth, cycling through the
    palette for deeper tables.
    """

    default_palette = ('level-0', 'level-1', 'level-2', 'level-3',)

    def __init__(self, schema, *, palette=None, tags=None):
        super().__init__()
        self.schema = schema
        if palette is None:
            palette = self.default_palette
        if not palette:
            raise ValueError("The style tag palette must not be empty")
        self.palette = tuple(palette)
        self.tags = dict(tags) if tags else {}

    def get_css_tag(self, table_id):
        if table_id in self.tags:
            return self.tags[table_id]
        if table_id is None or table_id not in self.schema.tables:
            logger.debug("No style tag for unknown table ‘%s’", table_id)
            return ''
        depth = self.schema.get_table(table_id).depth
        return self.palette[depth % len(self.palette)]
