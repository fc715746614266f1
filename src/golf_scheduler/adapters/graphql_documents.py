"""GraphQL documents used against the AppSync schema."""

LIST_USERS = """
query GetUsers {
  listUsers {
    id name nickname phone isAdmin createdAt updatedAt
  }
}
"""

GET_USER_TAGS = """
query GetUserTags($userId: ID!) {
  getUserTags(userId: $userId) {
    id userId tagId createdAt createdBy
  }
}
"""

LIST_SESSIONS = """
query GetSessions($includeArchived: Boolean) {
  listGolfSessions(includeArchived: $includeArchived) {
    id title date description createdById isArchived
    createdAt updatedAt archivedAt archivedBy
  }
}
"""

GET_RESPONSES_FOR_SESSION = """
query GetResponsesForSession($golfSessionId: ID!) {
  getResponsesForSession(golfSessionId: $golfSessionId) {
    id status note transport userId golfSessionId createdAt updatedAt
  }
}
"""

LIST_TAGS = """
query GetTags {
  listTags {
    id name description color createdAt updatedAt
  }
}
"""

GET_SESSION_TAGS = """
query GetSessionTags($sessionId: ID!) {
  getSessionTags(sessionId: $sessionId) {
    id sessionId tagId createdAt
  }
}
"""

SUBMIT_RESPONSE = """
mutation SubmitResponse($input: SubmitResponseInput!) {
  submitResponse(input: $input) {
    id status note transport userId golfSessionId createdAt updatedAt
  }
}
"""

DELETE_RESPONSE = """
mutation DeleteResponse($userId: ID!, $golfSessionId: ID!) {
  deleteResponse(userId: $userId, golfSessionId: $golfSessionId) {
    id status note transport userId golfSessionId createdAt updatedAt
  }
}
"""

CREATE_USER = """
mutation CreateUser($input: CreateUserInput!) {
  createUser(input: $input) {
    id name nickname phone isAdmin createdAt updatedAt
  }
}
"""

UPDATE_USER = """
mutation UpdateUser($input: UpdateUserInput!) {
  updateUser(input: $input) {
    id name nickname phone isAdmin createdAt updatedAt
  }
}
"""

DELETE_USER = """
mutation DeleteUser($id: ID!) {
  deleteUser(id: $id)
}
"""

CREATE_SESSION = """
mutation CreateGolfSession($input: CreateGolfSessionInput!) {
  createGolfSession(input: $input) {
    id title date description createdById isArchived
    createdAt updatedAt archivedAt archivedBy
  }
}
"""

UPDATE_SESSION = """
mutation UpdateGolfSession($input: UpdateGolfSessionInput!) {
  updateGolfSession(input: $input) {
    id title date description createdById isArchived
    createdAt updatedAt archivedAt archivedBy
  }
}
"""

ADD_TAG_TO_SESSION = """
mutation AddTagToSession($input: AddTagToSessionInput!) {
  addTagToSession(input: $input) {
    id sessionId tagId createdAt
  }
}
"""
