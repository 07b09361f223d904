"""Protocol instructions appended to flow tool descriptions for the AI."""

FLOW_PROTOCOL = "\n".join(
    [
        "",
        "## FLOW EXECUTION PROTOCOL",
        "",
        "This tool implements a multi-step conversational flow. Follow this protocol exactly:",
        "",
        '1. Call with `action: "start"` to begin.',
        "2. The response JSON `status` field tells you what to do next:",
        '   - `"interrupt"`: Ask the user the `question`. Then call again with:',
        '     `action: "continue"`, `step` = the returned `step`, `state` = the returned `state`,',
        "     `answer` = the user's answer.",
        '   - `"widget"`: A widget UI is being shown. Do NOT call this tool again - the widget handles the callback.',
        '   - `"complete"`: The flow is done. Present the result to the user.',
        '   - `"error"`: Something went wrong. Show the `error` message.',
        "",
        "3. ALWAYS pass back the `state` object exactly as received.",
        "4. Do NOT skip steps or invent state values.",
    ]
)

DYNAMIC_PROTOCOL = "\n".join(
    [
        "",
        "## DYNAMIC FORM PROTOCOL",
        "",
        "This tool uses an AI-driven form. You gather information through natural",
        "conversation instead of following rigid steps.",
        "",
        '1. Call with `action: "start"` to get the field requirements.',
        "2. The response tells you what information is needed:",
        "   - `fields`: Schema of all active fields (type, label, options, hints)",
        "   - `gathered`: What has already been collected",
        "   - `missing`: Required fields still needed",
        "   - `errors`: Validation errors for previously submitted values",
        "3. Gather the missing information through natural conversation:",
        "   - Ask about multiple related fields in one message when appropriate",
        "   - If the user already provided information, include it - don't re-ask",
        "   - Follow field `hint` values for questioning style guidance",
        "   - Respect `dependsOn` - gather dependency fields first",
        "   - For `select` fields, present the available options",
        "   - Fields with type `widget` are handled automatically - do NOT gather them",
        '4. Call with `action: "submit"` and `data` containing gathered values.',
        "5. Check the response `status`:",
        '   - `"gathering"`: More fields needed - see `missing` and `errors`',
        '   - `"widget"`: A widget UI is being shown - do NOT call again until callback',
        '   - `"complete"`: Done - present the `result` to the user',
        '   - `"error"`: Something went wrong. Show the `error` message.',
        "",
        "Important:",
        "- Partial submissions are encouraged - submit what you have so far",
        "- ALWAYS pass back `state` exactly as received",
        "- Combine related questions naturally instead of asking one at a time",
        "- If a field has an error, explain the issue and ask for correction",
    ]
)


def with_protocol(description: str, protocol: str) -> str:
    return f"{description}\n{protocol}"
