"""Decode nested CSV records into dataclasses, timestamps included."""

import io
from dataclasses import dataclass, field
from datetime import datetime

from csv_nest import ConversionRule, CSVOptions, CSVParser, CSVReader


CSV_TEXT = """id,joined,score,company-0-name,company-1-name
1,2020-01-02T03:04:05Z,10,Acme,Globex
2,2021-06-07T08:09:10+02:00,7,Initech,
"""


@dataclass
class Company:
    name: str = field(metadata={"csv": "name"})


@dataclass
class Employee:
    employee_id: str = field(metadata={"csv": "id"})
    joined: datetime = field(metadata={"csv": "joined"})
    score: int = field(metadata={"csv": "score"})
    companies: list[Company] = field(default_factory=list, metadata={"csv": "company"})


def main() -> None:
    """Decode two employees using a custom delimiter and struct tag."""
    records = CSVReader().read(io.StringIO(CSV_TEXT))
    parser = CSVParser(
        CSVOptions(delimiter="-", struct_tag="csv"),
        rules=[ConversionRule(target=int, source=str, convert=int)],
    )
    for employee in parser.to_struct(records, list[Employee]):
        print(employee)


if __name__ == "__main__":
    main()
