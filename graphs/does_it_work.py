"""
graphs/does_it_work.py

The "Does it work?" troubleshooting flowchart.
"""

from models import GraphSpec

NAME = "does_it_work"

GRAPH_DATA = {
    "name": NAME,
    "column_spacing": 200,
    "row_spacing": 120,
    "top": 100,
    "nodes": [
        {
            "key": "doesItWork",
            "text": "Does it work?",
            "help_text": "Determine whether the system is functioning properly.",
            "shape": "diamond",
            "cell": [0, 0],
        },
        {
            "key": "dontMessWithIt",
            "text": "Don't mess with it",
            "help_text": "If it works, leave it alone.",
            "cell": [-1.5, 1],
        },
        {
            "key": "didYouMessWithIt",
            "text": "Did you mess with it?",
            "help_text": "Check if you were the one who changed anything.",
            "shape": "diamond",
            "cell": [1.5, 1],
        },
        {
            "key": "youIdiot",
            "text": "You idiot!",
            "help_text": "A humorous response to messing with a working system.",
            "cell": [0.5, 1.5],
        },
        {
            "key": "willYouBeBlamed",
            "text": "Will you be blamed anyway?",
            "help_text": "Will you be held responsible regardless of what happened?",
            "shape": "diamond",
            "cell": [1.5, 2.5],
        },
        {
            "key": "forgetAboutIt",
            "text": "Forget about it!",
            "help_text": "If you won’t be blamed, just let it go.",
            "cell": [1.5, 4],
        },
        {
            "key": "doesAnyoneElseKnow",
            "text": "Does anyone else know?",
            "help_text": "Determine if anyone else is aware of the problem.",
            "shape": "diamond",
            "cell": [-0.5, 1.5],
        },
        {
            "key": "hideIt",
            "text": "Hide it",
            "help_text": "A funny suggestion to cover up the issue.",
            "cell": [-1, 3],
        },
        {
            "key": "youreToast",
            "text": "You're toast!",
            "help_text": "If others know and you’re responsible, you're in trouble.",
            "cell": [0, 3],
        },
        {
            "key": "canYouBlame",
            "text": "Can you blame someone else?",
            "help_text": "Try to redirect blame if possible.",
            "shape": "diamond",
            "cell": [0, 4],
        },
        {
            "key": "noProblem",
            "text": "No problem!",
            "help_text": "Success! You’ve dodged the issue.",
            "cell": [0, 5.5],
        },
    ],
    "edges": [
        {"start": "doesItWork", "end": "dontMessWithIt", "start_side": "left", "end_side": "top", "label": "Yes"},
        {"start": "doesItWork", "end": "didYouMessWithIt", "start_side": "right", "end_side": "top", "label": "No"},
        {"start": "didYouMessWithIt", "end": "youIdiot", "start_side": "left", "end_side": "right", "label": "Yes"},
        {"start": "didYouMessWithIt", "end": "willYouBeBlamed", "start_side": "bottom", "end_side": "top", "label": "No"},
        {"start": "youIdiot", "end": "doesAnyoneElseKnow", "start_side": "left", "end_side": "right"},
        {"start": "doesAnyoneElseKnow", "end": "hideIt", "start_side": "left", "end_side": "top", "label": "No",
         "start_tangent_distance": 22},
        {"start": "doesAnyoneElseKnow", "end": "youreToast", "start_side": "bottom", "end_side": "top", "label": "Yes"},
        {"start": "willYouBeBlamed", "end": "youreToast", "start_side": "left", "end_side": "right", "label": "Yes"},
        {"start": "willYouBeBlamed", "end": "forgetAboutIt", "start_side": "bottom", "end_side": "top", "label": "No"},
        {"start": "youreToast", "end": "canYouBlame", "start_side": "bottom", "end_side": "top"},
        {"start": "canYouBlame", "end": "youreToast", "start_side": "left", "end_side": "left", "label": "No"},
        {"start": "canYouBlame", "end": "noProblem", "start_side": "bottom", "end_side": "top", "label": "Yes"},
        {"start": "hideIt", "end": "noProblem", "start_side": "bottom", "end_side": "top", "end_offset": [-30, 0]},
        {"start": "forgetAboutIt", "end": "noProblem", "start_side": "bottom", "end_side": "right"},
        {"start": "dontMessWithIt", "end": "noProblem", "start_side": "bottom", "end_side": "left",
         "end_tangent_distance": 200},
    ],
}


def build() -> GraphSpec:
    return GraphSpec.from_dict(GRAPH_DATA)
