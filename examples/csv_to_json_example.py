"""Minimal example converting flat CSV text into nested JSON."""

import io

from csv_nest import CSVParser, CSVReader


CSV_TEXT = """id,name,company.0.name,company.0.role,company.1.name,company.1.role
1,Ada,Acme,dev,Globex,lead
2,Bob,Initech,ops,,
"""


def main() -> None:
    """Read rows from an in-memory CSV and print them as nested JSON."""
    with CSVReader() as reader:
        records = reader.read(io.StringIO(CSV_TEXT))

    parser = CSVParser()
    print("map:", parser.to_map([dict(record) for record in records]))
    print("json:", parser.to_json(records))


if __name__ == "__main__":
    main()
