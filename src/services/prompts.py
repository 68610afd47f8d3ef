"""Prompts for persona replies and meeting minutes.

Both prompts place the transcript before the instructions so the
instructions are the last thing the model reads.
"""

PERSONA_REPLY_PROMPT = """Context of the meeting so far:
{transcript}

User's new input: {utterance}

Please respond to the User's input while considering the meeting context.
Other attendees may already have replied above; build on, agree with, or challenge them rather than repeating them.
Keep your response concise (under 200 words) unless detailed technical advice is needed.
"""

SUMMARY_PROMPT = """You are a professional meeting secretary.

Transcript:
{transcript}

---

Analyze the meeting transcript above and generate a structured set of Meeting Minutes and a Thought Process Organization.

1. topic: Extract the main topic.
2. keyPoints: List key points as formal meeting minutes.
3. actionItems: Extract action items with owners. Each has a task, an owner (the attendee responsible, or "Unassigned"), and a status of exactly one of "Pending", "InProgress", or "Done".
4. conclusion: State the final consensus or summary.
5. decisionTree: Create a "Communication Thought Process" that shows the logical flow of the discussion, from the initial problem to the final solution, in chronological order. Each step names a phase or key question and lists the considerations, arguments, or options discussed at that phase, highlighting how different perspectives contributed.

Use ONLY what is in the transcript. Do not invent attendees, tasks, or decisions.
"""
