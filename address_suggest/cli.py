# address_suggest/cli.py
import argparse
import json
import sys
from pathlib import Path

from . import config
from .ban_client import BanClient
from .communes import load_communes
from .errors import AddressSuggestError
from .mapping import map_suggestions_to_response
from .pipeline import suggest_addresses


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Suggest BAN addresses inside a commune.")
    ap.add_argument("query", help="free-text address fragment, e.g. '12 rue de la paix'")
    ap.add_argument("--commune-id", required=True)
    ap.add_argument("--limit", type=int, default=None)
    ap.add_argument("--communes", type=Path, default=config.COMMUNES_PATH,
                    help="JSON export of the communes")
    ap.add_argument("--log-level", default=config.LOG_LEVEL)
    args = ap.parse_args(argv)

    config.configure_logging(args.log_level)
    directory = load_communes(args.communes)

    try:
        geo = directory.resolve(args.commune_id).to_geo_context()
        with BanClient() as client:
            suggestions = suggest_addresses(args.query, geo, client, limit=args.limit)
    except AddressSuggestError as e:
        print(json.dumps({"error": e.message}, ensure_ascii=False), file=sys.stderr)
        return 1

    response = map_suggestions_to_response(suggestions)
    print(json.dumps(response.model_dump(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
