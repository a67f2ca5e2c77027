"""Match form submissions in localdata/submissions.xlsx against a CRM contact export."""

import pandas as pd
from contactmatch import ContactMatcher, MatchCriteria
from contactmatch.io import read_candidates, result_row, write_rows

# Read data
submissions = pd.read_excel("localdata/submissions.xlsx", dtype=str)
submissions = submissions.astype(object).where(submissions.notna(), None)
contacts = read_candidates("localdata/contacts_export.xlsx")

print(f"Submissions: {len(submissions)}")
print(f"Contacts: {len(contacts)}")

matcher = ContactMatcher()

rows = []
for i, record in enumerate(submissions.to_dict(orient="records")):
    criteria = MatchCriteria.from_form(record)
    result = matcher.find_best_match(criteria, contacts)
    rows.append(result_row(result, submission_row=i, submission_email=criteria.email))

# Summary
decisions = matcher.stats.decisions
print(
    f"\nResults: MATCH={decisions['MATCH']}, "
    f"BELOW_THRESHOLD={decisions['BELOW_THRESHOLD']}, "
    f"NO_CANDIDATES={decisions['NO_CANDIDATES']}"
)

output_path = "localdata/submission_matches.xlsx"
write_rows(rows, output_path)
print(f"Saved to: {output_path}")
