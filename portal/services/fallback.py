"""Hand-authored content used whenever the provider cannot be trusted.

Everything here is deterministic and schema-valid, so the layers above always
have a complete section to serve and a narrative to return.
"""
from typing import List

from portal.models.question import CodingExample, Question, QuestionType, SectionId
from portal.models.session import Feedback
from portal.services.normalizer import render_problem_text

# (text, options, correct index)
_MCQ_BANK = [
    ("What is the worst-case time complexity of quicksort?",
     ["O(n log n)", "O(n^2)", "O(n)", "O(log n)"], 1),
    ("Which data structure gives O(1) average lookup by key?",
     ["Linked list", "Binary heap", "Hash table", "Sorted array"], 2),
    ("Which traversal of a binary search tree yields keys in sorted order?",
     ["In-order", "Pre-order", "Post-order", "Level-order"], 0),
    ("Which algorithm finds shortest paths from one source with non-negative edge weights?",
     ["Kruskal", "Dijkstra", "Prim", "Floyd cycle detection"], 1),
    ("A stack follows which access order?",
     ["FIFO", "LIFO", "Priority order", "Random access"], 1),
    ("Which SQL clause filters rows after aggregation?",
     ["WHERE", "ORDER BY", "HAVING", "LIMIT"], 2),
    ("Which normal form removes transitive dependencies on the key?",
     ["1NF", "2NF", "3NF", "None of these"], 2),
    ("Which isolation level prevents dirty reads but allows non-repeatable reads?",
     ["Read uncommitted", "Read committed", "Repeatable read", "Serializable"], 1),
    ("What does the I in ACID stand for?",
     ["Integrity", "Isolation", "Indexing", "Idempotence"], 1),
    ("Which index structure do most relational databases use by default?",
     ["B-tree", "Bloom filter", "Trie", "Skip list"], 0),
    ("Which condition is NOT required for a deadlock?",
     ["Mutual exclusion", "Hold and wait", "Preemption", "Circular wait"], 2),
    ("What does a page fault indicate?",
     ["A corrupted page", "A referenced page is not in memory",
      "A full disk", "A cache hit"], 1),
    ("Which scheduling algorithm can starve long jobs?",
     ["Round robin", "First come first served", "Shortest job first", "Lottery"], 2),
    ("Threads of the same process share which of these?",
     ["Stack", "Program counter", "Registers", "Heap"], 3),
    ("Which transport protocol guarantees ordered delivery?",
     ["UDP", "TCP", "ICMP", "ARP"], 1),
    ("Which HTTP method is idempotent?",
     ["POST", "PUT", "PATCH", "CONNECT"], 1),
    ("DNS primarily resolves what?",
     ["IP to MAC", "Hostnames to IP addresses", "Ports to services", "URLs to files"], 1),
    ("Which HTTP status code means the resource was not found?",
     ["200", "301", "404", "500"], 2),
    ("Which layer of the OSI model handles routing?",
     ["Data link", "Network", "Transport", "Session"], 1),
    ("Which principle states a class should have one reason to change?",
     ["Open/closed", "Liskov substitution", "Single responsibility", "Dependency inversion"], 2),
    ("Which design pattern restricts a class to one instance?",
     ["Factory", "Observer", "Singleton", "Adapter"], 2),
    ("Which git command integrates another branch's history into the current one?",
     ["git fetch", "git merge", "git stash", "git clone"], 1),
    ("What does a container image package?",
     ["Only the kernel", "An application with its dependencies",
      "A virtual machine BIOS", "A database snapshot"], 1),
    ("In REST, which method is used to create a resource?",
     ["GET", "POST", "DELETE", "HEAD"], 1),
    ("Which caching strategy evicts the least recently used entry?",
     ["FIFO", "LFU", "LRU", "Random"], 2),
    ("What is horizontal scaling?",
     ["Adding CPU to one machine", "Adding more machines",
      "Adding disk space", "Upgrading the OS"], 1),
    ("Which structure is best for implementing a priority queue?",
     ["Binary heap", "Queue", "Stack", "Doubly linked list"], 0),
    ("What is the time complexity of binary search on a sorted array?",
     ["O(n)", "O(log n)", "O(n log n)", "O(1)"], 1),
    ("Which technique solves overlapping subproblems by storing results?",
     ["Greedy", "Backtracking", "Dynamic programming", "Divide and conquer"], 2),
    ("Which testing level verifies a single function in isolation?",
     ["Unit", "Integration", "System", "Acceptance"], 0),
]

# (text, correct answer)
_FITB_BANK = [
    ("The complexity of binary search is O(___).", "log n"),
    ("SQL command to remove a table is DROP ___.", "TABLE"),
    ("HTTP status code 404 means Not ___.", "Found"),
    ("In OOP, inheritance represents a '___-a' relationship.", "is"),
    ("To protect shared resources in threads, we use a ___.", "Lock"),
    ("The data structure using LIFO principle is a ___.", "Stack"),
    ("DNS translates domain names to ___ addresses.", "IP"),
    ("In REST API, POST is used to ___ a resource.", "Create"),
    ("Git command to combine branches is git ___.", "merge"),
    ("Docker uses ___ to package applications.", "containers"),
]

# (statement, examples)
_CODING_BANK = [
    ("Problem 1: Implement a function to check if a Linked List has a cycle. "
     "Return true if any node can be reached again by continuously following the next pointer.",
     [CodingExample(input="[3,2,0,-4], pos=1", output="true")]),
    ("Problem 2: Given an array of integers, return indices of the two numbers such that "
     "they add up to a specific target. Each input has exactly one solution.",
     [CodingExample(input="nums = [2,7,11,15], target = 9", output="[0,1]")]),
]


def fallback_mcq() -> List[Question]:
    return [
        Question(
            id=index,
            type=QuestionType.MCQ,
            text=text,
            options=list(options),
            correct_answer=answer,
            marks=1,
        )
        for index, (text, options, answer) in enumerate(_MCQ_BANK, start=1)
    ]


def fallback_fitb() -> List[Question]:
    return [
        Question(id=8000 + index, type=QuestionType.FITB, text=text, correct_answer=answer, marks=2)
        for index, (text, answer) in enumerate(_FITB_BANK, start=1)
    ]


def fallback_coding() -> List[Question]:
    return [
        Question(
            id=9000 + index,
            type=QuestionType.CODING,
            text=render_problem_text(statement, examples),
            examples=list(examples),
            marks=25,
        )
        for index, (statement, examples) in enumerate(_CODING_BANK, start=1)
    ]


_BY_SECTION = {
    SectionId.MCQ: fallback_mcq,
    SectionId.FITB: fallback_fitb,
    SectionId.CODING: fallback_coding,
}


def fallback_questions(section_id: SectionId) -> List[Question]:
    return _BY_SECTION[SectionId(section_id)]()


def fallback_feedback(score: int, max_score: int) -> Feedback:
    return Feedback(
        summary=(
            f"The candidate scored {score}/{max_score}. Performance analysis suggests "
            "reviewing core concepts for better technical readiness."
        ),
        strengths=["Technical attempt", "Completed all sections", "Time management"],
        weaknesses=["Accuracy", "Optimization", "Edge case handling"],
        roadmap=["Review core algorithms", "Practice system design", "Solve timed coding problems"],
    )


def fallback_run_output(language: str) -> str:
    return (
        f"> Compiling {language}...\n"
        "> Error: Compiler Service Unavailable.\n"
        "> Please check your connection and try again."
    )
