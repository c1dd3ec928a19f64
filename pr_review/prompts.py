def build_review_prompt(description: str | None, diff: str) -> str:
    return f"""
You are an expert code reviewer. Please review the following pull request and provide line-by-line suggestions for improvements.
Focus on code quality, best practices, potential bugs, and performance issues.

PR Description:
{description or "(no description)"}

Diff (with line numbers):
{diff}

Please provide your review as a concise overview of your review, and an array of suggestion objects with the given schema.
Make sure to include the file path for each suggestion and use the correct line numbers as shown in the diff.
"""
