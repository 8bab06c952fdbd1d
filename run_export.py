"""Script to print a workbook sheet as CSV."""

import sys

from workbook_accessor import WorkbookReader, row_to_csv


def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print("Usage: python run_export.py <path_to_workbook> [sheet_name]")
        print("Example: python run_export.py C:\\datasets\\paymentterms.xlsx payment_terms")
        return 1

    workbook_file = argv[1]

    try:
        with WorkbookReader(workbook_file) as reader:
            if len(argv) > 2:
                reader.turn_to_sheet(argv[2])

            print(f"Sheet: {reader.current_sheet_name} (of {', '.join(reader.sheet_names)})\n")
            header = reader.header
            if header:
                print(row_to_csv(header))
            count = 0
            for line in reader.to_csv():
                print(line)
                count += 1

            print(f"\n{count} rows exported")

    except Exception as e:
        print(f"\nError: {e}")
        import traceback

        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
