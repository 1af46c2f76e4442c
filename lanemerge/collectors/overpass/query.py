"""
Overpass query construction

Builds the Overpass XML script that fetches a relation, its ways, the nodes
of those ways and the ways touching those nodes.
"""

from xml.sax.saxutils import escape

from ...errors import OverpassError

QUERY_TEMPLATE = (
    '<osm-script output="json">'
    "<union>"
    '<query type="relation">{search_mode}</query>'
    '<recurse type="relation-way"/>'
    '<recurse type="way-node"/>'
    '<recurse type="node-way"/>'
    "</union>"
    "<print/>"
    "</osm-script>"
)


def is_relation_id(search_term: str) -> bool:
    return search_term.strip().isdigit()


def build_query(search_term: str) -> str:
    """
    Build the Overpass query for a search term

    A numeric term is treated as a relation ID, anything else as a relation
    name.

    Args:
        search_term: Relation name or ID

    Returns:
        Overpass XML query string

    Raises:
        OverpassError: If the term is empty or contains a double quote
    """
    term = search_term.strip()
    if not term:
        raise OverpassError(OverpassError.MALFORMED_SEARCH)
    if '"' in term:
        raise OverpassError(OverpassError.ILLEGAL_CHARACTER)

    if is_relation_id(term):
        search_mode = f'<id-query type="relation" ref="{term}"/>'
    else:
        search_mode = f'<has-kv k="name" v="{escape(term)}"/>'

    return QUERY_TEMPLATE.format(search_mode=search_mode)
